"""Member registry: the static board, in configured order."""

import sys
from collections.abc import Iterable, Iterator

from boardroom.models import BoardMember

# Members missing from the registry sort after every configured priority.
UNKNOWN_PRIORITY = sys.maxsize


class MemberRegistry:
    """Immutable, ordered view over the configured board members."""

    def __init__(self, members: Iterable[BoardMember]) -> None:
        self._members: tuple[BoardMember, ...] = tuple(members)
        self._by_id: dict[str, BoardMember] = {}
        for member in self._members:
            if member.id in self._by_id:
                raise ValueError(f"Duplicate board member id: {member.id}")
            self._by_id[member.id] = member

    def get(self, member_id: str) -> BoardMember | None:
        return self._by_id.get(member_id)

    def find_by_role(self, role: str) -> BoardMember | None:
        """First member holding `role`, in configured order."""
        return next((m for m in self._members if m.role == role), None)

    def priority_of(self, member_id: str) -> int:
        member = self._by_id.get(member_id)
        return member.priority if member is not None else UNKNOWN_PRIORITY

    def first(self, n: int) -> list[BoardMember]:
        return list(self._members[:n])

    def __iter__(self) -> Iterator[BoardMember]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._by_id
