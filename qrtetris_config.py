
CONFIG = {
    "FPS": 60,
    "DROP_INTERVAL_TICKS": 60,
    "BRIGHTNESS_THRESHOLD": 128,
    "ANCHOR_SIZE": 9,
    "ANCHOR_FAR_SIZE": 8,
    "MIN_GRID": 21,
    "MAX_GRID": 41,
    "MIN_CELL": 8,
    "MAX_CELL": 30,
    "WIDTH_FRACTION": 0.8,
    "HEIGHT_FRACTION": 0.6,
    "WINDOW_W": 1024,
    "WINDOW_H": 900,
    "SEED": None,
    "VALIDATE_QR": True,
}
