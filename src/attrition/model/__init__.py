from .encoder import CategoryEncoding, FittedEncoding, fit_category_encoding, fit_category_encodings
from .metadata import MetaData
from .model_config import ModelConfig, get_model_config, model_configs
from .models import BaseModel, LightGBMModel, MLPClassifierModel, TrainingConfig, TrainingHistory
from .preprocess import (
    PreparedDataset,
    assemble_record,
    assemble_records,
    decode_vector,
    encode_label,
    prepare_dataset,
    prepare_records,
)
from .scaler import ScalerState, apply_scaler, fit_scaler
from .schema import (
    ColumnKind,
    ColumnSchema,
    Schema,
    SchemaConfig,
    filter_records,
    parse_numeric_or_default,
    resolve_schema,
)
from .split import (
    SplitConfig,
    SplitIndices,
    SplitMode,
    make_windows,
    permutation,
    sort_chronologically,
    split_chronological,
    split_shuffled,
    stack_windows,
)

__all__ = [
    "BaseModel",
    "CategoryEncoding",
    "ColumnKind",
    "ColumnSchema",
    "FittedEncoding",
    "LightGBMModel",
    "MLPClassifierModel",
    "MetaData",
    "ModelConfig",
    "PreparedDataset",
    "ScalerState",
    "Schema",
    "SchemaConfig",
    "SplitConfig",
    "SplitIndices",
    "SplitMode",
    "TrainingConfig",
    "TrainingHistory",
    "apply_scaler",
    "assemble_record",
    "assemble_records",
    "decode_vector",
    "encode_label",
    "filter_records",
    "fit_category_encoding",
    "fit_category_encodings",
    "fit_scaler",
    "get_model_config",
    "make_windows",
    "model_configs",
    "parse_numeric_or_default",
    "permutation",
    "prepare_dataset",
    "prepare_records",
    "resolve_schema",
    "sort_chronologically",
    "split_chronological",
    "split_shuffled",
    "stack_windows",
]
