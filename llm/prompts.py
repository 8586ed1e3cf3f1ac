"""
Prompt templates for code governance analysis.

The template fixes the JSON shape the model must answer with; the response
parser relies on those key names.
"""

from __future__ import annotations

ANALYSIS_KEYS = (
    "overallAssessment",
    "ruleComplianceCheck",
    "detailedAnalysis",
    "suggestedCorrection",
    "costOptimization",
)

ANALYSIS_PROMPT_TEMPLATE = """
You are an expert AI Governance agent for a Bybit crypto trading bot. Your purpose is to analyze code changes and ensure they adhere to a strict set of immutable operational rules.

Here are the immutable rules (Source of Truth):
---
{rules}
---

Here is a code snippet that has been proposed by another AI agent:
---
{code}
---

Analyze the provided code snippet based on the following user request:
---
{user_query}
---

Your analysis MUST be structured in a valid JSON format with the following keys: {keys}.

- "overallAssessment": A brief summary of whether the code is compliant, has warnings, or is in violation.
- "ruleComplianceCheck": An array of objects, each with "rule" (string), "compliant" (boolean), and "details" (string).
- "detailedAnalysis": A point-by-point explanation of any potential issues, violations, or improvements, referencing specific lines of code. Use markdown for formatting.
- "suggestedCorrection": (Optional) If violations are found, provide a corrected version of the code snippet that is fully compliant with the rules. Provide only the code block.
- "costOptimization": (Optional) Suggest ways to make the code more efficient in terms of API calls or token usage.

Respond with valid JSON only. No additional text.
"""


def build_analysis_prompt(code: str, user_query: str, rules: str) -> str:
    """Embed code, query and rules into the analysis template."""
    keys = ", ".join(f'"{k}"' for k in ANALYSIS_KEYS)
    return ANALYSIS_PROMPT_TEMPLATE.format(
        rules=rules,
        code=code,
        user_query=user_query,
        keys=keys,
    )
