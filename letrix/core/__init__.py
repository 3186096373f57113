"""
Puzzle Engine Package

Pure, synchronous game logic: word normalization, guess statuses, daily
puzzle selection, submission, session snapshots, bootstrap reconciliation
and stats. Nothing in here touches persistence, the network or the clock.
"""
