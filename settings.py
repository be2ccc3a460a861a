from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # ANU-compatible endpoint: GET ?length=&type=uint8|uint16|hex16[&size=]
    QRNG_API_URL: str = "https://qrng.anu.edu.au/API/jsonI.php"
    QRNG_TIMEOUT: float = Field(20.0, gt=0)
    # the source serves at most 1024 samples per call and 1024-byte hex16 blocks
    QRNG_PER_CALL_LIMIT: int = Field(1024, ge=1, le=1024)
    QRNG_MAX_BLOCK_SIZE: int = Field(1024, ge=1, le=1024)

    # widest amount one scheduler run is handed at once
    COUNTER_WIDTH: int = Field(2**63 - 1, ge=1)
    # HTTP responses are buffered, keep them bounded
    API_MAX_AMOUNT: int = Field(100_000, ge=0)

    STORE_DIR: str = "./storage/requests"
    LOG_LEVEL: str = "INFO"

settings = Settings()
