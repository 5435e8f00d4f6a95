import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_FLAGS: tuple[str, ...] = (
    "ptr_arg",
    "too_many_arguments",
    "missing_errors_doc",
    "missing_panics_doc",
    "await_holding_lock",
    "await_holding_refcell_ref",
    "assertions_on_constants",
    "large_stack_arrays",
    "match_bool",
    "needless_bitwise_bool",
    "empty_enum",
    "enum_clike_unportable_variant",
    "enum_glob_use",
    "exhaustive_enums",
    "cast_precision_loss",
    "float_arithmetic",
    "float_cmp",
    "float_cmp_const",
    "imprecise_flops",
    "suboptimal_flops",
    "as_conversions",
    "cast_lossless",
    "cast_possible_truncation",
    "cast_possible_wrap",
    "ptr_as_ptr",
    "default_numeric_fallback",
    "checked_conversions",
    "integer_arithmetic",
    "cast_sign_loss",
    "modulo_arithmetic",
    "exhaustive_structs",
    "struct_excessive_bools",
    "unwrap_used",
    "expect_used",
    "expect_fun_call",
    "large_types_passed_by_value",
    "fn_params_excessive_bools",
    "trivially_copy_pass_by_ref",
    "inline_always",
    "inefficient_to_string",
    "dbg_macro",
    "wildcard_imports",
    "self_named_module_files",
    "mod_module_files",
    "disallowed_methods",
    "disallowed_script_idents",
    "disallowed_types",
)


DIAGNOSTICS_DIR = "diagnostics"
TRANSFORM_DIR = "transform"


class Settings(BaseModel):
    workdir: Path = Path(".")
    output_root: Path = Path(".")
    timeout: float = Field(default=600.0, gt=0)


def load_settings() -> Settings:
    workdir = Path(os.getenv("RUST_DIAGNOSTICS_WORKDIR", "."))
    output_root = Path(os.getenv("RUST_DIAGNOSTICS_OUTPUT", str(workdir)))
    timeout = float(os.getenv("RUST_DIAGNOSTICS_TIMEOUT", "600"))
    return Settings(workdir=workdir, output_root=output_root, timeout=timeout)


def resolve_flags(flags: list[str] | None) -> list[str]:
    """Return the requested lint names, or the default table when none were given. Duplicates are dropped."""
    chosen = flags or list(DEFAULT_FLAGS)
    return list(dict.fromkeys(flag.strip() for flag in chosen if flag.strip()))
