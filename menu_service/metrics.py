from prometheus_client import Counter

MENU_OPERATIONS = Counter(
    "menu_operations_total",
    "Menu service operations by outcome",
    ["operation", "outcome"],  # outcome: ok | not_found | invalid_state | record_too_large | fatal
)

AVAILABILITY_TRANSITIONS = Counter(
    "menu_availability_transitions_total",
    "Committed availability transitions",
    ["transition"],  # order | receive
)
