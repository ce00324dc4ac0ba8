import hotspot_tour.utils.i18n  # noqa: F401
