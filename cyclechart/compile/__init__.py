from .frames import compile_changed_rect_batch, compile_full_rewrite_batch

__all__ = ["compile_changed_rect_batch", "compile_full_rewrite_batch"]
