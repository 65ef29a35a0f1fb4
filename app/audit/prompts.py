"""
Instruction templates sent to the model.
"""

from app.models import Verdict

NO_RISK_PHRASE = "No significant risk"
CATEGORY_WORD_LIMIT = 15

VERDICT_PHRASES = ", ".join(f'"{v.value}"' for v in Verdict)

RISK_CATEGORIES_INSTRUCTION = f"""
5. A specific breakdown of risks in these 4 categories. Keep descriptions extremely short (under {CATEGORY_WORD_LIMIT} words) using simple, globally understood English:
   - Human Centric (impact on personal rights, freedom, privacy)
   - Financial (unexpected costs, penalties, money loss)
   - Cyber (data leaks, hacking, spying)
   - Mental (stress, unfair pressure, peace of mind)
   If no risk is detected in a category, state "{NO_RISK_PHRASE}".
"""

COMMON_INSTRUCTION = f"""
You are an expert senior legal counsel and contract risk auditor.
Analyze the provided legal document or text.
Identify hidden risks, dangerous clauses, and unfair terms.

CRITICAL INSTRUCTION: Use simple, universally understood English (CEFR Level B1). Avoid complex legal jargon. If a legal term is necessary, explain it simply.

Provide a structured analysis including:
1. A plain-English executive summary. Simple words only.
2. An overall risk score (0-100, where 0 is Safe and 100 is Dangerous).
3. A short verdict. Use ONLY one of these globally understood phrases: {VERDICT_PHRASES}.
4. A list of specific risky clauses.
   - Simplified Explanation: Explain the danger as if speaking to a non-lawyer.
   - Recommendation: Clear, actionable advice using simple verbs (e.g., "Ask to remove this", "Change this to...").
{RISK_CATEGORIES_INSTRUCTION}
"""

URL_TASK_TEMPLATE = """
{instruction}

TASK:
The user has provided a URL or Company Name: "{target}".
1. Search for the latest "Terms of Service", "Terms of Use", or "Privacy Policy" associated with this URL or Company.
2. Analyze the content of that legal agreement.
"""

TEXT_TASK_TEMPLATE = """
{instruction}

Contract Text:
"{contract}"
"""


def url_prompt(target: str) -> str:
    return URL_TASK_TEMPLATE.format(instruction=COMMON_INSTRUCTION, target=target)


def text_prompt(contract: str) -> str:
    return TEXT_TASK_TEMPLATE.format(instruction=COMMON_INSTRUCTION, contract=contract)
