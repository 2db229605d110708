import copy

import pytest
import yaml

from ringil.config import AppConfig, ConfigError

SAMPLE = {
    "target": {
        "type": "person",
        "embedding": [0.25, -0.5, 1.0],
        "threshold": 0.75,
        "coordinates": {"lat": 48.5, "lon": 2.25, "alt": 120.0},
    },
    "avoidance": {
        "person_safe_distance": 5.0,
        "safe_distance": 2.5,
        "max_yaw_rate": 0.5,
        "repulse_gain": 1.5,
    },
    "controller": {"p_gain_advance": 0.8, "p_gain_yaw": 1.2},
    "vision": {"video_src": "/dev/video0", "resolution": [1280, 720], "frame_rate": 30},
    "communication": {"mavlink_url": "udp://127.0.0.1:14540", "heartbeat_rate": 1.0},
    "simulation": {"use_sim_time": True, "timeout_connect": 10},
    "offboard": {"failsafe_on_loss": True, "command_freq": 20.0},
}

SAMPLE_TOML = """
[target]
type = "person"
embedding = [0.25, -0.5, 1.0]
threshold = 0.75

[target.coordinates]
lat = 48.5
lon = 2.25
alt = 120.0

[avoidance]
person_safe_distance = 5.0
safe_distance = 2.5
max_yaw_rate = 0.5
repulse_gain = 1.5

[controller]
p_gain_advance = 0.8
p_gain_yaw = 1.2

[vision]
video_src = "/dev/video0"
resolution = [1280, 720]
frame_rate = 30

[communication]
mavlink_url = "udp://127.0.0.1:14540"
heartbeat_rate = 1.0

[simulation]
use_sim_time = true
timeout_connect = 10

[offboard]
failsafe_on_loss = true
command_freq = 20.0
"""


def test_load_toml_matches_mapping(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(SAMPLE_TOML)
    loaded = AppConfig.load_from_file(str(path))
    assert loaded == AppConfig.from_mapping(SAMPLE)
    assert loaded.target.type == SAMPLE["target"]["type"]
    assert loaded.vision.resolution == tuple(SAMPLE["vision"]["resolution"])
    assert loaded.target.coordinates.alt == SAMPLE["target"]["coordinates"]["alt"]


def test_load_without_extension_finds_toml(tmp_path):
    (tmp_path / "config.toml").write_text(SAMPLE_TOML)
    loaded = AppConfig.load_from_file(tmp_path / "config")
    assert loaded.simulation.timeout_connect == SAMPLE["simulation"]["timeout_connect"]


def test_load_yaml_matches_toml(tmp_path):
    (tmp_path / "a.toml").write_text(SAMPLE_TOML)
    (tmp_path / "b.yaml").write_text(yaml.safe_dump(SAMPLE))
    assert AppConfig.load_from_file(tmp_path / "b.yaml") == AppConfig.load_from_file(
        tmp_path / "a.toml"
    )


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        AppConfig.load_from_file(tmp_path / "absent")


def test_invalid_toml_raises(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[target\ntype = ")
    with pytest.raises(ConfigError):
        AppConfig.load_from_file(path)


def test_missing_section_raises():
    data = copy.deepcopy(SAMPLE)
    del data["offboard"]
    with pytest.raises(ConfigError, match="offboard"):
        AppConfig.from_mapping(data)


def test_missing_field_raises():
    data = copy.deepcopy(SAMPLE)
    del data["controller"]["p_gain_yaw"]
    with pytest.raises(ConfigError, match="p_gain_yaw"):
        AppConfig.from_mapping(data)


def test_coordinates_are_optional():
    data = copy.deepcopy(SAMPLE)
    del data["target"]["coordinates"]
    assert AppConfig.from_mapping(data).target.coordinates is None


def test_integer_accepted_for_float_field():
    data = copy.deepcopy(SAMPLE)
    data["offboard"]["command_freq"] = 20
    value = AppConfig.from_mapping(data).offboard.command_freq
    assert isinstance(value, float)
    assert value == 20


@pytest.mark.parametrize("resolution", [[1280], [1280, 720, 3], [1280, -720]])
def test_bad_resolution_raises(resolution):
    data = copy.deepcopy(SAMPLE)
    data["vision"]["resolution"] = resolution
    with pytest.raises(ConfigError):
        AppConfig.from_mapping(data)


def test_wrong_type_raises():
    data = copy.deepcopy(SAMPLE)
    data["simulation"]["use_sim_time"] = "yes"
    with pytest.raises(ConfigError, match="use_sim_time"):
        AppConfig.from_mapping(data)


def test_non_mapping_root_raises():
    with pytest.raises(ConfigError):
        AppConfig.from_mapping([1, 2, 3])