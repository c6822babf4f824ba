"""Manage groves: named collections of git worktrees across repositories."""
