"""FarmFresh marketplace backend."""
