from typing import Dict, List, Optional

DEFAULT_STYLE_GUIDE = """Tone: concise, friendly, product/help-center.
Fixed terms: imToken, Passkey, Token Collections, Arbitrum.
Prefer idiomatic English; avoid literal calques."""

REPORT_SCHEMA = """{
  "rows": [
    { "index": 1, "source": "...", "translation": "...", "issues": "...",
      "fix": "...", "score": "5/4/5", "severity": "minor" }
  ],
  "summary": "...",
  "rules": ["rule1","rule2","rule3"]
}"""

EDITOR_PERSONA = "You are a senior bilingual editor."

system_prompt = f"""{EDITOR_PERSONA} You must return ONLY a JSON object.
No markdown fences, no backticks, no commentary. Schema:
{REPORT_SCHEMA}"""

audit_procedure = """Audit the translation for accuracy, idiomaticity, and consistency.
1) Split both texts into paragraphs by blank lines; align by order.
2) For each pair, identify issues: mistranslation, missing info, unnatural phrasing,
   term inconsistency, punctuation/format.
3) Provide a corrected rewrite (concise, idiomatic, same meaning).
4) Score each pair: Accuracy/Idiomaticity/Consistency (1–5).
5) Mark severity: minor / moderate / critical."""

def resolve_style(style: Optional[str], default_style: str = DEFAULT_STYLE_GUIDE) -> str:
    return style or default_style

def _texts_block(src: str, tgt: str) -> str:
    return f"Texts:\nSOURCE:\n{src}\n\nTRANSLATION:\n{tgt}"

def build_user_prompt(src: str, tgt: str, style: str) -> str:
    """
    User turn for json mode: procedure, style guide and the two texts.
    The schema lives in the system turn.
    """
    return "\n\n".join([
        audit_procedure,
        f"Style guide (customizable):\n{style}",
        _texts_block(src, tgt),
    ])

def build_single_prompt(src: str, tgt: str, style: str) -> str:
    """
    Self-contained prompt for chat mode, where there is no system turn and no
    response_format: persona, procedure, style guide, schema, texts.
    """
    return "\n".join([
        f"{EDITOR_PERSONA} {audit_procedure}",
        f"Style guide (customizable):\n{style}",
        "",
        "Return ONLY a JSON object, with no surrounding text or code fences, matching:",
        REPORT_SCHEMA,
        _texts_block(src, tgt),
    ])

def build_messages(src: str, tgt: str, style: str, mode: str = "json") -> List[Dict[str, str]]:
    if mode == "chat":
        return [{"role": "user", "content": build_single_prompt(src, tgt, style)}]
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": build_user_prompt(src, tgt, style)},
    ]
