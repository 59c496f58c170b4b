"""Mapping of backend-native status values to canonical states.

Each normalizer is total: values missing from its table become
UNKNOWN(raw) with the raw value kept as-is, never an error.
"""

from svcstat.models.status import CanonicalState, ServiceState

# dwCurrentState values from SERVICE_STATUS_PROCESS
WINDOWS_STATE_MAP: dict[int, ServiceState] = {
    1: ServiceState.STOPPED,
    2: ServiceState.START_PENDING,
    3: ServiceState.STOP_PENDING,
    4: ServiceState.RUNNING,
    5: ServiceState.CONTINUE_PENDING,
    6: ServiceState.PAUSE_PENDING,
    7: ServiceState.PAUSED,
}

# systemd ActiveState values
SYSTEMD_STATE_MAP: dict[str, ServiceState] = {
    "active": ServiceState.RUNNING,
    "activating": ServiceState.START_PENDING,
    "deactivating": ServiceState.STOP_PENDING,
    "inactive": ServiceState.STOPPED,
    "failed": ServiceState.STOPPED,
    "reloading": ServiceState.CONTINUE_PENDING,
}


def normalize_windows(code: int) -> CanonicalState:
    """Map a Windows SCM current-state code."""
    kind = WINDOWS_STATE_MAP.get(code) if isinstance(code, int) else None
    if kind is None:
        return CanonicalState.unknown(code)
    return CanonicalState.of(kind)


def normalize_systemd(active_state: str) -> CanonicalState:
    """Map a systemd ActiveState value."""
    kind = SYSTEMD_STATE_MAP.get(active_state)
    if kind is None:
        return CanonicalState.unknown(active_state)
    return CanonicalState.of(kind)


def normalize_probe(value: str) -> CanonicalState:
    """Map a lower-cased canonical state name, as reported by OpenRC probes."""
    try:
        kind = ServiceState(value.upper())
    except ValueError:
        return CanonicalState.unknown(value)
    if kind == ServiceState.UNKNOWN:
        return CanonicalState.unknown(value)
    return CanonicalState.of(kind)
