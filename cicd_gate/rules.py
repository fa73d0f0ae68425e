import dataclasses


RULE_KIND_PREFIX = "prefix"
RULE_KIND_EXACT = "exact"

REQUIRED_APPROVER = "chumyin"


@dataclasses.dataclass(frozen=True)
class SensitivePathRule:
    kind: str
    value: str

    def __post_init__(self) -> None:
        if self.kind not in {RULE_KIND_PREFIX, RULE_KIND_EXACT}:
            raise ValueError(f"rule.invalid kind={self.kind}")
        if not self.value:
            raise ValueError("rule.invalid empty value")

    def matches(self, path: str) -> bool:
        if self.kind == RULE_KIND_PREFIX:
            return path.startswith(self.value)
        return path == self.value


def prefix(value: str) -> SensitivePathRule:
    return SensitivePathRule(RULE_KIND_PREFIX, value)


def exact(value: str) -> SensitivePathRule:
    return SensitivePathRule(RULE_KIND_EXACT, value)


SENSITIVE_PATH_RULES = (
    prefix(".github/workflows/"),
    prefix(".github/codeql/"),
    prefix(".github/connectivity/"),
    prefix(".github/release/"),
    prefix(".github/security/"),
    prefix("scripts/ci/"),
    exact(".github/actionlint.yaml"),
    exact(".github/dependabot.yml"),
    exact("docs/ci-map.md"),
    exact("docs/actions-source-policy.md"),
    exact("docs/operations/self-hosted-runner-remediation.md"),
)


def classify_paths(paths, rules=SENSITIVE_PATH_RULES):
    """Return the changed paths matched by any rule, in input order."""
    return [path for path in paths if any(rule.matches(path) for rule in rules)]
