"""PaperFX - simulated trading accounts with position P&L settlement."""
