"""elfdeps core: error taxonomy, data models and the resolution engine."""
