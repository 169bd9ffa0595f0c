"""Intent agents: swap, send and balance."""
