# person_extractor/core/prompts.py
"""Prompt template for person extraction and the builder that fills it."""

DOCUMENT_PLACEHOLDER = "[DOCUMENT_TEXT]"

PERSON_EXTRACTION_PROMPT = """
You are a specialized assistant for extracting historical biographical information from documents about passengers and crew members who traveled on the City of Adelaide ship.

TASK:
Extract information about ALL distinct persons mentioned in the document.

OUTPUT FORMAT:
You MUST return a JSON object with this structure:
{
  "persons": [
    { person1 details },
    { person2 details },
    ...
  ]
}

SCHEMA (for each person):
{
  "first_name": "First name of the person (required)",
  "middle_names": "Middle name(s) of the person, if any (can be null)",
  "last_name": "Last name of the person (required)",
  "gender": "Gender (Male, Female, or null if unknown)",
  "birth_date": "Date of birth in YYYY-MM-DD format (use approximate date if exact date is unknown, e.g., '1850-01-01' for 'circa 1850')",
  "birth_place": "Place of birth",
  "death_date": "Date of death in YYYY-MM-DD format",
  "death_place": "Location where the person died",
  "age_at_death": "Age at death (as a string, e.g., '65 years')",
  "burial_place": "Place where the person was buried"
}

INSTRUCTIONS:
1. Identify EVERY distinct person mentioned, not only the main subject of the document.
2. Look for family members, spouses, children, parents, siblings and other individuals.
3. For each person, extract all biographical details that match the schema.
4. Dates MUST use YYYY-MM-DD format. If only a year is known, use YYYY-01-01. If only a year and month are known, use the first day of that month.
5. Only include fields where information is available.
6. If a person has no middle names, set middle_names to null.
7. First name and last name are required for each person.
8. Each mention of a spouse, child, parent, or sibling should result in an additional person entry.
9. People are often mentioned in passing - make sure to capture them all.
10. If the document mentions nobody, return {"persons": []}.

DOCUMENT:
[DOCUMENT_TEXT]

OUTPUT:
Return your response as a JSON object with a "persons" array containing all people identified in the document. Always use this format:
{
  "persons": [
    { "first_name": "...", "last_name": "...", ... },
    { "first_name": "...", "last_name": "...", ... },
    ...
  ]
}
"""


def build_prompt(document_text: str, template: str = PERSON_EXTRACTION_PROMPT) -> str:
    """Substitute the document text verbatim for the template's single placeholder."""
    count = template.count(DOCUMENT_PLACEHOLDER)
    if count != 1:
        raise ValueError(f"Prompt template must contain exactly one {DOCUMENT_PLACEHOLDER} placeholder, found {count}")
    return template.replace(DOCUMENT_PLACEHOLDER, document_text)
