import pytest

from attrition.model import SchemaConfig

HEADER = ["Age", "MonthlyIncome", "EmployeeNumber", "YearsAtCompany", "OverTime", "JobRole", "Department", "Notes", "Attrition"]
JOB_ROLES = ["Sales Executive", "Research Scientist", "Manager"]
DEPARTMENTS = ["Research & Development", "Sales"]


# テスト用の小さな人事データ CSV を生成する
def make_attrition_csv(n_rows: int = 40, malformed_lines: int = 1) -> str:
    lines = [",".join(HEADER)]
    for i in range(n_rows):
        attrition = "Yes" if (i % 6 == 0) or (i % 5 == 0) else "No"
        row = [
            str(20 + i % 30),
            str(1000 + (37 * i) % 500),
            str(i + 1),
            str(i % 7),
            "Yes" if i % 3 == 0 else "No",
            JOB_ROLES[i % 3],
            DEPARTMENTS[i % 2],
            f"note{i}",
            attrition,
        ]
        lines.append(",".join(row))
    # ヘッダーと列数が一致しない行（読み飛ばされるべき行）
    for _ in range(malformed_lines):
        lines.append("99,1000,extra,field,Yes")
    return "\n".join(lines) + "\n"


@pytest.fixture
def attrition_csv() -> str:
    return make_attrition_csv()


@pytest.fixture
def small_schema_config() -> SchemaConfig:
    return SchemaConfig(
        numeric_columns=("Age", "MonthlyIncome", "EmployeeNumber", "YearsAtCompany"),
        categorical_columns=("OverTime", "JobRole", "Department"),
        label_column="Attrition",
    )


@pytest.fixture
def tiny_csv() -> str:
    return "A,B,Attrition\n1,x,Yes\n2,y,No\n"


@pytest.fixture
def tiny_schema_config() -> SchemaConfig:
    return SchemaConfig(numeric_columns=("A",), categorical_columns=("B",), label_column="Attrition")
