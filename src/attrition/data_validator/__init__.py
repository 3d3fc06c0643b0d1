from .schema import build_feature_frame_schema, to_feature_frame

__all__ = ["build_feature_frame_schema", "to_feature_frame"]
