from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tabletop.db"
    COMPANY_NAME: str = "Tabletop Configurator"

    # Pricing defaults
    PROFIT_PERCENTAGE_DEFAULT: float = 30.0
    QUANTITY_MAX: int = 999

    # Boundary sampling resolution
    ARC_SEGMENTS: int = 16          # per rounded corner / semicircle quarter
    CIRCLE_SEGMENTS: int = 128
    ELLIPSE_SEGMENTS: int = 64
    SUPER_ELLIPSE_SEGMENTS: int = 128

    # Floor applied to every dimension before division or multiplication
    MIN_DIMENSION_MM: float = 1.0

    class Config:
        env_file = ".env"


settings = Settings()
