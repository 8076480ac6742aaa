"""ngstory - add Storybook to Angular CLI workspaces."""

__version__ = "0.3.0"
