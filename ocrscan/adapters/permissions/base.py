class CapabilityService:
    def check(self, capability) -> bool:
        """True only if the capability is currently granted."""
        raise NotImplementedError

    def request(self, capability, rationale) -> bool:
        """Prompt for an undecided capability. Returns the user's decision."""
        raise NotImplementedError

    def decisions(self) -> dict:
        return {}
