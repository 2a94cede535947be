"""
Capability service backed by a decision table.

Each capability is granted, denied or undecided. `request` on an undecided
capability asks the prompter once and stores the answer. There is no
operator at a headless server, so the default prompter answers with a fixed
policy (CAPABILITY_PROMPT_ANSWER).
"""
from typing import Callable, Optional
from ocrscan.adapters.permissions.base import CapabilityService
from ocrscan.orchestrator.contracts import Capability

GRANTED = "granted"
DENIED = "denied"
UNDECIDED = "undecided"
DECISIONS = (GRANTED, DENIED, UNDECIDED)


def parse_grants(raw: str) -> dict[Capability, str]:
    """Parse `capture=granted,positioning=ask` style strings."""
    out: dict[Capability, str] = {}
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        name, _, value = part.partition("=")
        value = value.strip().lower()
        if value == "ask":
            value = UNDECIDED
        if value not in DECISIONS:
            raise ValueError(f"bad capability decision {part!r}")
        out[Capability(name.strip().lower())] = value
    return out


class PolicyCapabilityService(CapabilityService):
    def __init__(self, status_store, decisions: Optional[dict] = None,
                 prompter: Optional[Callable[[Capability, dict], bool]] = None):
        self.status = status_store
        self._decisions = {cap: UNDECIDED for cap in Capability}
        self._decisions.update(decisions or {})
        self._prompter = prompter or (lambda cap, rationale: True)
        self.prompt_count = 0

    def check(self, capability: Capability) -> bool:
        return self._decisions[capability] == GRANTED

    def request(self, capability: Capability, rationale: dict) -> bool:
        current = self._decisions[capability]
        if current != UNDECIDED:
            return current == GRANTED
        self.prompt_count += 1
        self.status.log(f"permissions: prompt {capability.value} ({rationale.get('title', '')})")
        granted = bool(self._prompter(capability, rationale))
        self._decisions[capability] = GRANTED if granted else DENIED
        self.status.log(f"permissions: {capability.value} -> {self._decisions[capability]}")
        return granted

    def set_decision(self, capability: Capability, decision: str):
        if decision not in DECISIONS:
            raise ValueError(f"unknown decision {decision!r}")
        self._decisions[capability] = decision
        self.status.log(f"permissions: {capability.value} set {decision}")

    def decisions(self) -> dict:
        return {cap.value: d for cap, d in self._decisions.items()}
