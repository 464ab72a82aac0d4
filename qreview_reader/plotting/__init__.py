from .cross_section import plot_cross_section, save_cross_section

__all__ = ["plot_cross_section", "save_cross_section"]
