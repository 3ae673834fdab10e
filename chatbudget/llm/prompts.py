"""
Prompt text used by chatbudget.

The summarization instruction is sent as the system message of the
secondary model call that compresses older history.
"""

SUMMARY_SYSTEM_PROMPT = """You compress chat transcripts.

Summarize the conversation below as concise, factual bullet points.
- Preserve every instruction, constraint and preference the user stated.
- Keep names, numbers, code identifiers and decisions exactly as written.
- Note any open questions or unfinished tasks.
- Do not add commentary, opinions or information that is not in the transcript."""

SUMMARY_PREFIX = "(Earlier conversation summary)\n"

TRANSCRIPT_SEPARATOR = "\n\n---\n\n"

SUMMARY_MAX_TOKENS = 400

# Sample turn used by `python -m chatbudget`.
SAMPLE_SYSTEM_PROMPT = "You are a helpful assistant who is an expert in c# blazor."

SAMPLE_HISTORY = [
    ("user", "Say hello and tell me which model/deployment you are."),
    ("assistant", "Hello!"),
]

SAMPLE_USER_TURN = (
    "Now give me a basic program.cs for a simple hello world web application. "
    "be as minimal as you can."
)
