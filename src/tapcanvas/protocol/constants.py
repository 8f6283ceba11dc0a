# Message type constants (stringly-typed protocol; canonical list lives here)

# server -> one client, right after connect
T_INIT = "init"

# client -> server (intent) and server -> all clients (confirmed event)
T_ADD = "add"
T_REMOVE = "remove"

# Client-side presentation constants shared by every client.
LIFESPAN_S = 60  # seconds until a marker is fully faded and dropped
MARKER_RADIUS = 40  # px, also the hit-test half-width for taps
