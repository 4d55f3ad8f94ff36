import json

import pytest
from pydantic import ValidationError

from pyDVHMetrics.config import (
    MetricsConfig,
    DEFAULT_GEUD_PARAMETERS,
    validate_config,
    load_config,
)


def test_default_config():
    config = MetricsConfig()
    assert config.geud_parameters == DEFAULT_GEUD_PARAMETERS
    assert config.target_pattern == "PTV"
    assert config.excluded_dicom_types == ["MARKER"]
    assert config.bin_width == 0.1


def test_default_config_is_not_shared():
    config = MetricsConfig()
    config.geud_parameters["Femur"] = 4.0
    assert "Femur" not in MetricsConfig().geud_parameters
    assert "Femur" not in DEFAULT_GEUD_PARAMETERS


def test_match_structure_case_insensitive():
    config = MetricsConfig()
    assert config.match_structure("heart") == [("Heart", 0.5)]
    assert config.match_structure("SpinalCORD_PRV") == [("Cord", 20.0)]
    assert config.match_structure("Brainstem") == [("stem", 20.0)]
    assert config.match_structure("Femur_L") == []


def test_match_structure_multiple_patterns():
    config = MetricsConfig(geud_parameters={"Lung": 0.5, "Ipsilateral Lung": 1.0})
    assert config.match_structure("Ipsilateral Lung") == [
        ("Lung", 0.5),
        ("Ipsilateral Lung", 1.0),
    ]


def test_is_target():
    config = MetricsConfig()
    assert config.is_target("PTV_6000")
    assert config.is_target("ptv_boost")
    assert not config.is_target("CTV")
    assert MetricsConfig(target_pattern="CTV").is_target("ctv_high")


def test_is_excluded():
    config = MetricsConfig(excluded_dicom_types=["marker", " support "])
    assert config.excluded_dicom_types == ["MARKER", "SUPPORT"]
    assert config.is_excluded("Marker")
    assert not config.is_excluded("ORGAN")


@pytest.mark.parametrize(
    "params", [{"Heart": 0.0}, {"Cord": float("nan")}, {"": 1.0}, {"Lung": float("inf")}]
)
def test_invalid_geud_parameters(params):
    with pytest.raises(ValidationError):
        MetricsConfig(geud_parameters=params)


def test_invalid_geud_parameter_assignment():
    config = MetricsConfig()
    with pytest.raises(ValidationError):
        config.geud_parameters = {"Heart": 0}


def test_invalid_bin_width():
    with pytest.raises(ValidationError):
        MetricsConfig(bin_width=0.0)


def test_validate_config():
    config = MetricsConfig()
    assert validate_config(config) is config
    assert validate_config(None) == config
    assert validate_config({"targetPattern": "CTV"}).target_pattern == "CTV"
    with pytest.raises(ValueError):
        validate_config("PTV")


def test_load_config(tmp_path):
    path = tmp_path / "metrics.json"
    path.write_text(
        json.dumps({"geudParameters": {"Parotid": 1.0, "PTV": -10}, "target_pattern": "PTV"})
    )
    config = load_config(path)
    assert config.geud_parameters == {"Parotid": 1.0, "PTV": -10.0}
    assert config.match_structure("Parotid_R") == [("Parotid", 1.0)]


def test_load_config_invalid(tmp_path):
    path = tmp_path / "metrics.json"
    path.write_text(json.dumps({"geudParameters": {"Rectum": 0}}))
    with pytest.raises(ValidationError):
        load_config(path)
