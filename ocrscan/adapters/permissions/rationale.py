from ocrscan.orchestrator.contracts import Capability

# Prompt shown when a capability is still undecided
RATIONALE: dict[Capability, dict[str, str]] = {
    Capability.CAPTURE: {
        "title": "Camera Permission",
        "message": "App needs camera access to take photos.",
    },
    Capability.MEDIA_READ: {
        "title": "Storage Permission",
        "message": "App needs access to your gallery.",
    },
    Capability.MEDIA_WRITE: {
        "title": "Storage Permission",
        "message": "App needs storage access to save photos.",
    },
    Capability.POSITIONING: {
        "title": "Location Permission",
        "message": "App needs your location to tag scans.",
    },
}

# Alert body when the user refuses
DENIED_MESSAGE: dict[Capability, str] = {
    Capability.CAPTURE: "Camera permission is required.",
    Capability.MEDIA_READ: "Storage permission is required.",
    Capability.MEDIA_WRITE: "Storage permission is required.",
    Capability.POSITIONING: "Location permission is required for geotagging scans.",
}
