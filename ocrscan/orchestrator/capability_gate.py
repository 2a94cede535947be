from ocrscan.adapters.permissions.rationale import RATIONALE
from ocrscan.orchestrator.contracts import Capability


class CapabilityGate:
    """
    Single entry point for runtime authorization.

    Denial comes back as False, never as an exception. A granted capability
    is never prompted again; an undecided one is prompted at most once per
    call.
    """

    def __init__(self, service, status_store):
        self.service = service
        self.status = status_store

    def ensure(self, capability: Capability) -> bool:
        if self.service.check(capability):
            return True
        granted = self.service.request(capability, RATIONALE[capability])
        if not granted:
            self.status.log(f"gate: {capability.value} denied")
        return granted
