import pytest

from wncalc.config import (
    CalculatorSettings,
    EnvCredentialProvider,
    StaticCredentialProvider,
    load_settings_from_text_file,
    parse_settings_text,
    settings_from_env,
)


def test_defaults():
    s = CalculatorSettings()
    assert s.link_budget_model == "bidirectional"
    assert s.ofdm_model == "resource_block"
    assert s.unknown_modulation == "error"
    assert abs(s.reference_frequency_hz - 2.4e9) < 1
    assert s.target_grade_of_service == 0.02
    assert s.explanation.model == "deepseek/deepseek-chat:free"


def test_parse_settings_text_simple():
    text = """
    # calculator settings
    link_budget_model: EIRP
    ofdm-model = cyclic_prefix
    unknown_modulation: qpsk
    reference_frequency: 5.8 GHz
    target_gos: 1 %
    max_tokens = 800
    timeout: 5
    this line is ignored
    """
    s = parse_settings_text(text)
    assert s.link_budget_model == "eirp"
    assert s.ofdm_model == "cyclic_prefix"
    assert s.unknown_modulation == "qpsk"
    assert abs(s.reference_frequency_hz - 5.8e9) < 1
    assert abs(s.target_grade_of_service - 0.01) < 1e-12
    assert s.explanation.max_tokens == 800
    assert s.explanation.timeout_s == 5.0


def test_invalid_values_are_rejected():
    with pytest.raises(ValueError):
        parse_settings_text("link_budget_model: hata")
    with pytest.raises(ValueError):
        CalculatorSettings(target_grade_of_service=1.5)


def test_load_from_file(tmp_path):
    p = tmp_path / "wncalc.cfg"
    p.write_text("ofdm_model: cyclic_prefix\nreference_frequency: 900 MHz\n", encoding="utf-8")
    s = load_settings_from_text_file(p)
    assert s.ofdm_model == "cyclic_prefix"
    assert abs(s.reference_frequency_hz - 900e6) < 1


def test_env_overrides_file_settings():
    base = parse_settings_text("link_budget_model: eirp\ntarget_gos: 0.05")
    env = {"WNCALC_TARGET_GOS": "2 %", "WNCALC_MODEL": "other/model", "PATH": "/usr/bin"}
    s = settings_from_env(env, defaults=base)
    assert s.link_budget_model == "eirp"
    assert abs(s.target_grade_of_service - 0.02) < 1e-12
    assert s.explanation.model == "other/model"


def test_credential_providers():
    assert EnvCredentialProvider(environ={"OPENROUTER_API_KEY": " abc "}).get_api_key() == "abc"
    assert EnvCredentialProvider(environ={}).get_api_key() is None
    assert EnvCredentialProvider("MY_KEY", environ={"MY_KEY": "k"}).get_api_key() == "k"
    assert StaticCredentialProvider("xyz").get_api_key() == "xyz"
    assert StaticCredentialProvider("").get_api_key() is None
