from __future__ import annotations

SUMMARY_PROMPT_TEMPLATE = """You are an expert meeting summarizer. Analyze the following meeting transcript and create:

1. A concise summary (2-3 paragraphs) that captures the main points, decisions, and action items.

2. A structured slide presentation with 5-8 slides. Each slide should have:
   - A clear, descriptive title
   - 3-5 bullet points with key information

Format your response as JSON with this exact structure:
{{
  "summary": "Your concise summary here...",
  "slides": [
    {{
      "title": "Slide Title",
      "points": ["Point 1", "Point 2", "Point 3"]
    }}
  ]
}}

Meeting Transcript:
{transcript}

Respond ONLY with valid JSON, no additional text or markdown formatting."""


def build_summary_prompt(transcript: str) -> str:
    """Same prompt for every provider; only the transport envelope differs."""
    return SUMMARY_PROMPT_TEMPLATE.format(transcript=transcript)
