"""Display-name resolution for commitment targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .models import Client, Commitment, Project, TargetType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameLookup:
    client_names: dict[int, str]
    project_names: dict[int, str]

    @classmethod
    def from_entities(cls, clients: Iterable[Client], projects: Iterable[Project]) -> NameLookup:
        return cls(
            client_names={c.id: c.name for c in clients},
            project_names={p.id: p.name for p in projects},
        )

    def target_name(self, commitment: Commitment) -> str | None:
        if commitment.target_type == TargetType.CLIENT:
            return self.client_names.get(commitment.target_id)
        return self.project_names.get(commitment.target_id)

    def source_names(self, commitments: Iterable[Commitment]) -> tuple[str, ...]:
        """Names of the commitments' targets; unknown targets are left out."""
        names: list[str] = []
        for c in commitments:
            name = self.target_name(c)
            if name is None:
                logger.debug(
                    "Commitment %s points at unknown %s %s",
                    c.id,
                    c.target_type.value.lower(),
                    c.target_id,
                )
                continue
            names.append(name)
        return tuple(names)

    def display_name(self, commitment: Commitment) -> str:
        name = self.target_name(commitment)
        if name is not None:
            return name
        label = "Client" if commitment.target_type == TargetType.CLIENT else "Project"
        return f"Unknown {label} (ID {commitment.target_id})"
