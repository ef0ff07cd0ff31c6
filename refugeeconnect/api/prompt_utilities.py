"""
Prompt utilities for the refugee assistance assistant.

This module contains the fixed assistant persona, the per-language fallback
answers, and the helpers that turn a user query plus retrieved information
records into the user-turn prompt sent to the chat model.

All helpers here are pure: no I/O, no database access, no model calls.
"""

SYSTEM_PROMPT = """You are RefugeeAssist AI, a specialized assistant for refugees in Uganda. Your mission is to provide accurate, helpful information about:

1. Refugee registration processes and documentation
2. Legal rights and asylum procedures
3. Healthcare services and access
4. Educational opportunities for children and adults
5. Employment and livelihood opportunities
6. Housing and settlement information
7. Community integration and cultural adaptation
8. Emergency contacts and crisis support
9. Available NGO and government services

Guidelines:
- Be empathetic, respectful, and culturally sensitive
- Provide specific, actionable information when possible
- Include relevant contact information and locations
- Acknowledge when you need more context
- Always prioritize safety and official procedures
- Suggest multiple options when available
- Be aware of language barriers and simplify when needed

Current context: Uganda refugee assistance system"""
"""System instruction sent with every completion request."""

FALLBACK_RESPONSES = {
    "en": "I apologize, but I'm having trouble processing your request right now. Please try again later or contact our support team for immediate assistance.",
    "sw": "Nisamehe, lakini nina shida kuchakata ombi lako sasa. Tafadhali jaribu tena baadaye au wasiliana na timu yetu ya msaada.",
    "lg": "Nsonyiwa, naye nnina obuzibu okuddamu ekiragiro kyo kati. Nsaba ogezaako mulundi mulala oba otunuulire mu timu yaffe ey'obuyambi.",
}
"""Apology returned to the user when the pipeline fails, keyed by language code."""

SNIPPET_LENGTH = 200


def get_fallback_response(language: str | None) -> str:
    """Fallback answer for `language`; unknown codes get the English text."""
    return FALLBACK_RESPONSES.get(language or "en", FALLBACK_RESPONSES["en"])


def localized(texts, language: str | None) -> str:
    """
    Pick the `language` entry of a localized text map, falling back to English.

    Missing or empty entries fall back to ``en``; a missing or malformed map
    yields an empty string.
    """
    if not isinstance(texts, dict):
        return ""
    value = texts.get(language) if language else None
    if not value:
        value = texts.get("en")
    return value if isinstance(value, str) else ""


def build_enhanced_prompt(query, relevant_info, language) -> str:
    """
    Compose the user-turn prompt from the query and the retrieved records.

    Args:
        query (str): The user's question, quoted verbatim.
        relevant_info (list[dict]): Serialized information records, best match first.
        language (str): Requested response language code.

    Returns:
        str: The prompt. Each record contributes its localized title and the
        first 200 characters of its localized content followed by ``...``
        (always appended, even for shorter content).
    """
    query = query if isinstance(query, str) else ""
    language = language if isinstance(language, str) and language else "en"
    records = relevant_info if isinstance(relevant_info, list) else []

    prompt = f'User query: "{query}"\nLanguage: {language}\n\n'

    if records:
        prompt += "Relevant information from database:\n"
        for index, record in enumerate(records):
            record = record if isinstance(record, dict) else {}
            title = localized(record.get("title"), language)
            content = localized(record.get("content"), language)
            prompt += f"{index + 1}. {title}\n{content[:SNIPPET_LENGTH]}...\n\n"

    target = "English" if language == "en" else "the requested language"
    prompt += (
        f"Please provide a helpful response in {target}, "
        "incorporating the relevant information above if applicable."
    )
    return prompt


def lc_text_from_content(content) -> str:
    """Normalize LangChain message content to plain text.

    - If string → return as-is.
    - If list of content parts → concatenates only 'text' parts.
    - Else → str(content).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if isinstance(p, dict) and p.get("type") == "text")
    return str(content)
