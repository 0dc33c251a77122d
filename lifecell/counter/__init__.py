"""Counter application built on the Lifecell shared kernel."""
