STEPS = ('deps', 'yay', 'firefox', 'shell', 'configs', 'reboot')


def _check(names) -> set[str]:
    names = set(names or [])
    unknown = names - set(STEPS)
    if unknown:
        raise ValueError(f'Unknown step(s): {", ".join(sorted(unknown))}. Choose from: {", ".join(STEPS)}')
    return names


def resolve_steps(skip: list[str] | None = None, only: list[str] | None = None) -> list[str]:
    """Resolve which steps to run, in execution order.

    ``only`` wins over ``skip``; with ``only`` the reboot prompt runs only if named.
    """
    skip_set = _check(skip)
    only_set = _check(only)

    if only_set:
        return [s for s in STEPS if s in only_set]
    return [s for s in STEPS if s not in skip_set]
