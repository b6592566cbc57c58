from dataclasses import dataclass
import yaml

DEFAULT_PATH = "config.yaml"
DEFAULT_REQUEST_TIMEOUT = 10


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config():
    bearer_token: str
    integration_id: int
    tenant_id: int
    region: str
    poll_interval: int
    webhook_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def load(cls, path: str = DEFAULT_PATH) -> "Config":
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Can't read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Can't parse config file {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("config"), dict):
            raise ConfigError(f"Config file {path} has no 'config' mapping")
        return cls.from_dict(data["config"])

    @classmethod
    def from_dict(cls, conf: dict) -> "Config":
        timeout = conf.get("requestTimeoutSecs", DEFAULT_REQUEST_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"requestTimeoutSecs must be a positive number, got {timeout!r}")

        poll_interval = _required(conf, "pollIntervalSecs", int)
        if poll_interval <= 0:
            raise ConfigError(f"pollIntervalSecs must be positive, got {poll_interval}")

        token = _required(conf, "bearerToken", str, allow_empty=False)
        _check_header_value("bearerToken", token)

        return cls(
            bearer_token=token,
            integration_id=_required(conf, "integrationId", int),
            tenant_id=_required(conf, "tenantId", int),
            region=_required(conf, "region", str),
            poll_interval=poll_interval,
            webhook_url=_required(conf, "slackWebhookUrl", str, allow_empty=False),
            request_timeout=timeout,
        )


def _required(conf: dict, key: str, kind: type, allow_empty: bool = True):
    if key not in conf or conf[key] is None:
        raise ConfigError(f"Missing required config key: {key}")
    value = conf[key]
    # bool is an int subclass, yaml turns "yes"/"true" into one
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ConfigError(f"Config key {key} must be {kind.__name__}, got {type(value).__name__}")
    if not allow_empty and not value:
        raise ConfigError(f"Config key {key} can't be empty")
    return value


def _check_header_value(key: str, value: str):
    # the token ends up verbatim in the Authorization header
    if value != value.strip():
        raise ConfigError(f"Config key {key} has leading or trailing whitespace")
    if any(ord(c) < 0x20 or ord(c) == 0x7f for c in value):
        raise ConfigError(f"Config key {key} contains control characters")
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise ConfigError(f"Config key {key} contains characters that can't be sent in a header") from e
