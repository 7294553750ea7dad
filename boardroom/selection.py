"""Relevance selection: which board members answer a given query.

The keyword heuristic is a plain case-insensitive substring match against a
static role table. Callers depend on its exact outcomes, so it stays naive.
"""

from dataclasses import dataclass

from boardroom.members import MemberRegistry
from boardroom.models import BoardMember

# Used when no keyword pass matches anything.
FALLBACK_MEMBER_COUNT = 3

DEFAULT_ROLE_KEYWORDS: dict[str, list[str]] = {
    "Chairman": ["board", "governance", "oversight", "decision", "vote", "consensus", "shareholder"],
    "CEO": ["strategy", "vision", "business", "growth", "company", "revenue", "market", "execute"],
    "CFO": ["financial", "finance", "budget", "cost", "revenue", "profit", "investment", "roi", "cash"],
    "CTO": ["technical", "architecture", "infrastructure", "technology", "system", "engineering", "scale", "security"],
    "Chief Product Officer": ["product", "feature", "user", "roadmap", "requirements", "ux", "experience"],
    "Chief Marketing Officer": ["marketing", "brand", "customer", "campaign", "growth", "acquisition", "market"],
    "Non-Executive Director": ["risk", "compliance", "audit", "governance", "oversight", "independent"],
}


class InputError(ValueError):
    """Raised for an empty query or an unparseable selection mode."""


@dataclass(frozen=True)
class SelectionMode:
    kind: str                       # "all", "relevant" or "specific"
    member_id: str | None = None

    @classmethod
    def parse(cls, value: "str | SelectionMode") -> "SelectionMode":
        """Parse 'all', 'relevant' or 'specific:<member id>'."""
        if isinstance(value, SelectionMode):
            return value
        text = (value or "").strip()
        if text in ("all", "relevant"):
            return cls(kind=text)
        if text.startswith("specific:"):
            member_id = text.split(":", 1)[1].strip()
            if not member_id:
                raise InputError("Mode 'specific' needs a member id, e.g. 'specific:cfo'")
            return cls(kind="specific", member_id=member_id)
        raise InputError(f"Unknown mode '{value}' (expected all, relevant or specific:<id>)")

    def __str__(self) -> str:
        if self.kind == "specific":
            return f"specific:{self.member_id}"
        return self.kind


def _matches(query_lower: str, keywords: list[str]) -> bool:
    return any(keyword.lower() in query_lower for keyword in keywords)


def select_members(
    query: str,
    mode: SelectionMode,
    members: MemberRegistry,
    keywords: dict[str, list[str]],
    max_concurrent_agents: int,
    always_include_role: str | None = "CEO",
) -> list[BoardMember]:
    """Map (query, mode, board) to an ordered candidate list. No side effects."""
    if mode.kind == "all":
        return list(members)

    if mode.kind == "specific":
        member = members.get(mode.member_id or "")
        return [member] if member is not None else []

    query_lower = query.lower()
    selected: list[BoardMember] = []

    lead = members.find_by_role(always_include_role) if always_include_role else None
    if lead is not None:
        selected.append(lead)

    for member in members:
        if lead is not None and member.role == lead.role:
            continue
        if _matches(query_lower, keywords.get(member.role, [])):
            selected.append(member)

    if not selected:
        return members.first(FALLBACK_MEMBER_COUNT)

    # Truncation is by list order, not priority.
    return selected[:max_concurrent_agents]
