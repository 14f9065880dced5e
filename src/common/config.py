"""Configuration loading.

Configuration is read once (YAML from ``configs/``) into frozen dataclasses and
passed explicitly to the extraction and layout code.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"

# Local parses whose body is shorter than this are retried remotely.
MIN_BODY_LENGTH = 50


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class DeviceProfile:
    """Page geometry and type settings for one reading device."""
    key: str
    name: str
    label: str
    destination: str
    page_width: float
    page_height: float
    margins: Margins
    base_font_size: float
    line_height_multiplier: float
    image_align: str = "center"  # "center" or "left"

    @property
    def content_width(self) -> float:
        return self.page_width - self.margins.left - self.margins.right

    @property
    def line_gap(self) -> float:
        return self.base_font_size * self.line_height_multiplier - self.base_font_size


PRO_MOVE = DeviceProfile(
    key="pro_move",
    name="reMarkable Paper Pro Move",
    label="Paper Pro Move",
    destination="proMoveStart",
    page_width=954 / 1.5,
    page_height=1696 / 1.5,
    margins=Margins(top=100, right=50, bottom=40, left=50),
    base_font_size=22,
    line_height_multiplier=1.5,
    image_align="center",
)

PRO = DeviceProfile(
    key="pro",
    name="reMarkable Paper Pro",
    label="Paper Pro",
    destination="proStart",
    page_width=1620 / 1.5,
    page_height=2160 / 1.5,
    margins=Margins(top=120, right=60, bottom=50, left=60),
    base_font_size=28,
    line_height_multiplier=1.5,
    image_align="left",
)


@dataclass(frozen=True)
class HttpConfig:
    request_timeout: float = 30
    extraction_timeout: float = 180
    max_retries: int = 3
    base_delay: float = 1.0
    user_agent: str = "article-pdf/1.0"


@dataclass(frozen=True)
class AppConfig:
    model: str = "gemini-3-flash-preview"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    relay_url: str = "https://api.allorigins.win/raw"
    state_path: str = "~/.article_pdf/state.json"
    output_dir: str = "output"
    min_body_length: int = MIN_BODY_LENGTH
    http: HttpConfig = field(default_factory=HttpConfig)
    device_profiles: tuple[DeviceProfile, ...] = (PRO_MOVE, PRO)
    index_profile: str = "pro"

    def profile(self, key: str) -> DeviceProfile:
        """Look up a device profile by key."""
        for profile in self.device_profiles:
            if profile.key == key:
                return profile
        raise KeyError(f"Unknown device profile: {key}")


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(config_name: str | None = None, config_dir: Path | None = None) -> AppConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".
        config_dir: Directory holding the YAML files. Defaults to
                    ARTICLE_PDF_CONFIG_DIR or the repository's configs/.

    Returns:
        Loaded AppConfig object
    """
    if config_dir is None:
        config_dir = Path(os.environ.get("ARTICLE_PDF_CONFIG_DIR", DEFAULT_CONFIG_DIR))

    path = find_config_path(config_name, config_dir, env_var="CONFIG_ENV")
    return parse_config(load_yaml(path))


def _parse_profile(data: dict) -> DeviceProfile:
    margins = data.get("margins", {})
    return DeviceProfile(
        key=data["key"],
        name=data["name"],
        label=data.get("label", data["name"]),
        destination=data.get("destination", f"{data['key']}Start"),
        page_width=float(data["page_width"]),
        page_height=float(data["page_height"]),
        margins=Margins(
            top=margins.get("top", 72),
            right=margins.get("right", 72),
            bottom=margins.get("bottom", 72),
            left=margins.get("left", 72),
        ),
        base_font_size=float(data.get("base_font_size", 12)),
        line_height_multiplier=float(data.get("line_height_multiplier", 1.5)),
        image_align=data.get("image_align", "center"),
    )


def parse_config(data: dict) -> AppConfig:
    """Parse config dictionary into AppConfig object."""
    defaults = AppConfig()
    http_data = data.get("http", {})

    http = HttpConfig(
        request_timeout=http_data.get("request_timeout", defaults.http.request_timeout),
        extraction_timeout=http_data.get("extraction_timeout", defaults.http.extraction_timeout),
        max_retries=http_data.get("max_retries", defaults.http.max_retries),
        base_delay=http_data.get("base_delay", defaults.http.base_delay),
        user_agent=http_data.get("user_agent", defaults.http.user_agent),
    )

    profiles_data = data.get("device_profiles")
    if profiles_data:
        profiles = tuple(_parse_profile(p) for p in profiles_data)
    else:
        profiles = defaults.device_profiles

    return AppConfig(
        model=data.get("model", defaults.model),
        api_base=data.get("api_base", defaults.api_base),
        relay_url=data.get("relay_url", defaults.relay_url),
        state_path=data.get("state_path", defaults.state_path),
        output_dir=data.get("output_dir", defaults.output_dir),
        min_body_length=data.get("min_body_length", defaults.min_body_length),
        http=http,
        device_profiles=profiles,
        index_profile=data.get("index_profile", defaults.index_profile),
    )
