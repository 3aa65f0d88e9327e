"""Constants for platform fetchers."""

# Platform identifiers, as accepted by --program
PLATFORM_HACKERONE = "hackerone"
PLATFORM_INTIGRITI = "intigriti"
PLATFORM_BUGCROWD = "bugcrowd"

# Display names for placeholder fetchers
PLATFORM_DISPLAY_NAMES = {
    PLATFORM_HACKERONE: "HackerOne",
    PLATFORM_INTIGRITI: "Intigriti",
    PLATFORM_BUGCROWD: "Bugcrowd",
}

# HackerOne hacker API
HACKERONE_PROGRAMS_PATH = "/v1/hackers/programs"
HACKERONE_SCOPES_PATH = "/v1/hackers/programs/{handle}/structured_scopes"
HACKERONE_MAX_PAGE_SIZE = 100
FIRST_PAGE = 1
