"""Authorization Service for the Access Layer."""
