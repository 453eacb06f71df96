"""
Utility class for building Discord embeds consistently.
"""

import discord


class EmbedBuilder:
    """Utility class for building Discord embeds with consistent styling."""

    @staticmethod
    def error(title: str, description: str, **kwargs) -> discord.Embed:
        """Create an error embed (red)."""
        return discord.Embed(
            title=title, description=description, color=discord.Color.red(), **kwargs
        )

    @staticmethod
    def command_error(error_message: str) -> discord.Embed:
        """Create a command error embed."""
        return discord.Embed(
            description=f"❌ Error: {error_message}",
            color=discord.Color.red(),
        )

    @staticmethod
    def upstream_failure(command_name: str, error: Exception) -> discord.Embed:
        """Create the embed shown when a model API call fails."""
        return discord.Embed(
            title="Something Went Wrong",
            description=(
                f"The `{command_name}` command could not be completed. "
                f"Please try again later.\n\n**Error:** {error}"
            ),
            color=discord.Color.red(),
        )
