"""Settings shared by every environment module."""

# Fixed list offered by the scanner; "Manual Entry" and mobile bus ids are added by the scan service
SCAN_LOCATIONS = (
    "Bus #1",
    "Bus #2",
    "Classroom 101",
    "Classroom 205",
    "Main Entrance",
    "Cafeteria",
)
