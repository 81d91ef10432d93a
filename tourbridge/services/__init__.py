"""Services for Tourbridge."""
