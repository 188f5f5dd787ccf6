"""Client-side drag and drop pre-validation for a card-combination game."""
