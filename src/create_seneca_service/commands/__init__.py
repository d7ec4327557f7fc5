"""CLI plumbing shared by the root command: Click base class and AppContext."""
