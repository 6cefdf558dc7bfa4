DEFAULT_HOST = "127.0.0.1"
DEFAULT_TCP_PORT = 502
DEFAULT_BAUDRATE = 9600
DEFAULT_UNIT_ID = 1
DEFAULT_POLLING_INTERVAL_MILLIS = 1000
DEFAULT_CONNECTION_TIMEOUT_MILLIS = 3000

WORD_MASK = 0xFFFF
WORD_BITS = 16

MAX_ADDRESS = 0xFFFF
MAX_UNIT_ID = 255
