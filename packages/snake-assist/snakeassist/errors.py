"""Define error messages for the Snake Assist package."""

ERROR_INVALID_BOARD_SIZE = "Board dimensions must be at least {minimum}x{minimum}. Provided: {width}x{height}."
ERROR_INVALID_SPEED_BOUNDS = (
    "min_speed ({min_speed}) must be lower than max_speed ({max_speed}), "
    "and base_speed ({base_speed}) must lie between them."
)
ERROR_INVALID_START_POSITION = "Start position {position} is outside the {width}x{height} board."
ERROR_BODY_DOES_NOT_FIT = (
    "A snake of length {length} starting at {position} does not fit on the board."
)
ERROR_STORE_READ = "Could not load difficulty data from {location}: {error}"
ERROR_STORE_WRITE = "Could not save difficulty data to {location}: {error}"
ERROR_STORE_CLEAR = "Could not clear difficulty data at {location}: {error}"
