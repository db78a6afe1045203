"""
Time utilities
"""
import time

def now_iso() -> str:
    """Get current time in ISO format"""
    return time.strftime("%Y-%m-%dT%H:%M:%S")

def expires_in(seconds: int) -> int:
    """Unix timestamp `seconds` from now, for cookie expiry"""
    return int(time.time()) + int(seconds)
