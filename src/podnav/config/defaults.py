"""Default configuration values and the starter config file."""

from podnav.config.schema import GlobalConfig

DEFAULT_GLOBAL_CONFIG = GlobalConfig()

DEFAULT_CONFIG_CONTENT = """\
# podnav configuration
version: "1"
log_level: INFO

# Show opened by `podnav browse` when no show ID is given
default_show_id: null

# dark or light
theme: dark

catalog:
  api_base_url: https://api.spotify.com/v1
  token_url: https://accounts.spotify.com/api/token
  # Leave empty to read PODNAV_CLIENT_ID / PODNAV_CLIENT_SECRET
  client_id: null
  client_secret: null
  market: US
  timeout_seconds: 10.0
  max_retries: 3

browse:
  # Items per page, or "unlimited"
  default_page_size: 20
  page_size_choices: [10, 20, 50, 100, unlimited]
  # oldest_first: the first episode ever published is #1
  # newest_first: the latest episode is #1
  numbering: oldest_first
  scan_page_size: 50
  index_ttl_seconds: 300
  prefetch_full_collection: false
"""


def get_default_config_content() -> str:
    """Get default config.yaml content."""
    return DEFAULT_CONFIG_CONTENT
