"""frogboard - temporal task board with Big Frog highlighting."""
