"""Stable session identifiers.

Uids are derived from position (``w{week}s{session}``) so that scheduling the
same unscheduled program twice yields the same identifiers without random
generation. An existing uid is never replaced.
"""

from fitplan.programs.types import Program, ProgramSession, ProgramWeek


def generate_session_uid(week_number: int, session_number: int) -> str:
    return f"w{week_number}s{session_number}"


def ensure_uid(week: ProgramWeek, session: ProgramSession) -> str:
    """Return the session's uid, or the positional uid if it has none."""
    if session.uid:
        return session.uid
    return generate_session_uid(week.week, session.session)


def assign_session_uids(program: Program) -> Program:
    """Give every session without a uid a deterministic positional one.

    Existing uids are reserved first. A generated uid that would clash with
    one already in use (duplicated week/session numbers, or a hand-edited uid
    that looks positional) gets a ``-2``, ``-3``... suffix, so uids stay
    unique across the program.

    Sessions and weeks that already carry uids are returned as the same
    objects; the input program is never mutated.

    Args:
        program: Program to stamp

    Returns:
        Program in which every session has a non-empty uid
    """
    taken = {session.uid for _, session in program.iter_sessions() if session.uid}

    changed = False
    weeks = []
    for week in program.weeks:
        sessions = []
        week_changed = False
        for session in week.sessions:
            if session.uid:
                sessions.append(session)
                continue
            base = ensure_uid(week, session)
            uid = base
            suffix = 2
            while uid in taken:
                uid = f"{base}-{suffix}"
                suffix += 1
            taken.add(uid)
            sessions.append(session.model_copy(update={"uid": uid}))
            week_changed = True
        if week_changed:
            weeks.append(week.model_copy(update={"sessions": sessions}))
            changed = True
        else:
            weeks.append(week)

    if not changed:
        return program
    return program.model_copy(update={"weeks": weeks})
