"""Backend PlantNet: catalogue de plantes, checkout Stripe et commandes."""
