from .errors import (
    InputError,
    MissingInputError,
    InvalidNumberError,
    RangeError,
    CrossFieldError,
    ExplanationUnavailable,
)
from .validation import (
    FieldRule,
    FieldWarning,
    ValidationResult,
    parse_number,
    validate,
    default_inputs,
)
from .config import (
    CalculatorSettings,
    ExplanationSettings,
    parse_settings_text,
    load_settings_from_text_file,
    settings_from_env,
    EnvCredentialProvider,
    StaticCredentialProvider,
)
from .modulation import Modulation, ModulationEntry, default_modulation_table, parse_modulation, modulation_parameters
from .fspl import FSPL_CONSTANT_DB, fspl_db_textbook, invert_fspl_textbook_distance_m
from .erlang import erlang_b_blocking, min_channels_for_gos
from .wireless_chain import (
    WirelessChainInput,
    WirelessChainOutput,
    validate_wireless_chain,
    evaluate_wireless_chain,
)
from .ofdm import (
    OFDMInput,
    OFDMOutput,
    OFDMSymbolInput,
    OFDMSymbolOutput,
    validate_ofdm,
    validate_ofdm_symbol,
    evaluate_ofdm,
    evaluate_ofdm_symbol,
)
from .link_budget import (
    compute_eirp_dbm,
    received_power_dbm,
    link_margin_db,
    LinkBudgetInput,
    LinkBudgetOutput,
    SingleLinkInput,
    SingleLinkOutput,
    validate_link_budget,
    validate_single_link,
    evaluate_link_budget,
    evaluate_single_link,
)
from .cellular import CellularInput, CellularOutput, validate_cellular, evaluate_cellular
from .calculators import (
    CALCULATORS,
    CalculationResult,
    available_variants,
    select_variant,
    run_calculation,
)
from .report import outputs_to_table, inputs_to_table, record_to_table, print_table, save_table_csv
from .sweep import sweep, sweep_figure, save_sweep_plot
from .explain import ExplanationClient, Explanation, build_prompt, explain_result

__all__ = [
    # errors
    "InputError",
    "MissingInputError",
    "InvalidNumberError",
    "RangeError",
    "CrossFieldError",
    "ExplanationUnavailable",
    # validation
    "FieldRule",
    "FieldWarning",
    "ValidationResult",
    "parse_number",
    "validate",
    "default_inputs",
    # config
    "CalculatorSettings",
    "ExplanationSettings",
    "parse_settings_text",
    "load_settings_from_text_file",
    "settings_from_env",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
    # modulation
    "Modulation",
    "ModulationEntry",
    "default_modulation_table",
    "parse_modulation",
    "modulation_parameters",
    # path loss / traffic
    "FSPL_CONSTANT_DB",
    "fspl_db_textbook",
    "invert_fspl_textbook_distance_m",
    "erlang_b_blocking",
    "min_channels_for_gos",
    # calculators
    "WirelessChainInput",
    "WirelessChainOutput",
    "validate_wireless_chain",
    "evaluate_wireless_chain",
    "OFDMInput",
    "OFDMOutput",
    "OFDMSymbolInput",
    "OFDMSymbolOutput",
    "validate_ofdm",
    "validate_ofdm_symbol",
    "evaluate_ofdm",
    "evaluate_ofdm_symbol",
    "compute_eirp_dbm",
    "received_power_dbm",
    "link_margin_db",
    "LinkBudgetInput",
    "LinkBudgetOutput",
    "SingleLinkInput",
    "SingleLinkOutput",
    "validate_link_budget",
    "validate_single_link",
    "evaluate_link_budget",
    "evaluate_single_link",
    "CellularInput",
    "CellularOutput",
    "validate_cellular",
    "evaluate_cellular",
    # registry / front-end helpers
    "CALCULATORS",
    "CalculationResult",
    "available_variants",
    "select_variant",
    "run_calculation",
    "outputs_to_table",
    "inputs_to_table",
    "record_to_table",
    "print_table",
    "save_table_csv",
    "sweep",
    "sweep_figure",
    "save_sweep_plot",
    "ExplanationClient",
    "Explanation",
    "build_prompt",
    "explain_result",
]
