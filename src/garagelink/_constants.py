"""Internal constants shared across the library."""

PARTICLE_API_BASE = "https://api.particle.io/v1"
USER_AGENT = "garagelink/1"

#: Cloud function that pulses the opener relay.
PRESS_BUTTON_FUNCTION = "pressButton"
#: Cloud variable holding the door sensor reading.
DOOR_STATUS_VARIABLE = "doorStatus"

DEFAULT_THRESHOLD_MINUTES = 120
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_NOTIFY_TIMEOUT = 10.0

# Particle function return codes for pressButton.
RETURN_PRESSED = 1
RETURN_ALREADY_ACTIVE = 0
