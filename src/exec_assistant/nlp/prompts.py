# src/exec_assistant/nlp/prompts.py

from __future__ import annotations

INTENT_PROMPT_MARKER = "parses natural language commands for an executive assistant"
DATE_PROMPT_MARKER = "Convert this natural language date/time to ISO 8601"

INTENT_PROMPT_TEMPLATE = """
You are an AI assistant that parses natural language commands for an executive assistant application.
Analyze the following command and extract the intent and parameters.

Command: {command}

Respond ONLY with a valid JSON object in this exact format:
{{
  "action": "schedule_meeting" | "send_email" | "create_task" | "query_info" | "unknown",
  "parameters": {{
    // For schedule_meeting: title, startTime, endTime, attendees, location, description
    // For send_email: to, subject, body, type (follow_up, meeting_invite, reminder)
    // For create_task: title, description, dueDate, priority, assignedTo
    // For query_info: query
  }},
  "confidence": 0.0-1.0
}}

Examples:
- "Schedule a meeting with John next Tuesday at 2pm for 1 hour" -> schedule_meeting
- "Send a follow-up email to sarah@example.com about yesterday's meeting" -> send_email
- "Create a high priority task to review Q4 budget by Friday" -> create_task
- "What meetings do I have tomorrow?" -> query_info

Important:
- For dates/times, use ISO format or be descriptive (e.g., "next Tuesday 2pm")
- Extract email addresses when mentioned
- Identify priority levels (high, medium, low) for tasks
- Return ONLY valid JSON, no additional text
""".strip()

DATE_PROMPT_TEMPLATE = """
Convert this natural language date/time to ISO 8601 format.
Current date/time: {now}
Time zone for ambiguous local times: {tz}

Input: {text}

Respond ONLY with the ISO 8601 date string, nothing else.
Example: 2024-03-15T14:30:00.000Z
""".strip()

SUMMARY_PROMPT_TEMPLATE = "Summarize the following text concisely:\n\n{text}"

SUGGEST_RESPONSE_PROMPT_TEMPLATE = (
    "Based on this context, suggest a professional email response:\n\n{context}"
)
