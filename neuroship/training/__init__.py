"""Cost functions, optimizers, checkpoints and self-play training loops."""
