# パイプライン全体で共通利用するカラム名・既定値の定数定義
# IBM HR Attrition データセットのカラム構成と、前処理・評価で使う数値定数を一元管理する
from typing import Final

# 目的変数（離職フラグ）のカラム名
LABEL_COLUMN: Final = "Attrition"

# 正例（離職あり）として扱うラベルの生文字列。それ以外の値はすべて負例（0）になる
POSITIVE_LABEL: Final = "Yes"

# 数値特徴量として扱うカラムの許可リスト（この順序が特徴量ベクトルの並び順になる）
NUMERIC_COLUMNS: Final = (
    "Age",
    "DailyRate",
    "DistanceFromHome",
    "Education",
    "EmployeeCount",
    "EmployeeNumber",
    "EnvironmentSatisfaction",
    "HourlyRate",
    "JobInvolvement",
    "JobLevel",
    "JobSatisfaction",
    "MonthlyIncome",
    "MonthlyRate",
    "NumCompaniesWorked",
    "PercentSalaryHike",
    "PerformanceRating",
    "RelationshipSatisfaction",
    "StandardHours",
    "StockOptionLevel",
    "TotalWorkingYears",
    "TrainingTimesLastYear",
    "WorkLifeBalance",
    "YearsAtCompany",
    "YearsInCurrentRole",
    "YearsSinceLastPromotion",
    "YearsWithCurrManager",
)

# カテゴリ特徴量として扱うカラムの許可リスト（実際に使う列はヘッダーとの積集合で決まる）
CATEGORICAL_COLUMNS: Final = (
    "BusinessTravel",
    "Department",
    "EducationField",
    "Gender",
    "JobRole",
    "MaritalStatus",
    "Over18",
    "OverTime",
)

# 決定論的シャッフルに使う線形合同法（LCG）の固定シードと係数
DEFAULT_SEED: Final = 1337
LCG_MULTIPLIER: Final = 1664525
LCG_INCREMENT: Final = 1013904223
LCG_MODULUS: Final = 2**32

# 評価データの割合（既定値と許容範囲）
DEFAULT_TEST_FRACTION: Final = 0.2
MIN_TEST_FRACTION: Final = 0.05
MAX_TEST_FRACTION: Final = 0.9

# 時系列ウィンドウの長さの上限
MAX_SEQUENCE_LENGTH: Final = 16

# 時系列モードで並び替えに使う主キーと同順位時の副キー
DEFAULT_ORDER_COLUMN: Final = "YearsAtCompany"
DEFAULT_TIE_BREAK_COLUMN: Final = "EmployeeNumber"

# 標準偏差の分散下限（定数列でのゼロ除算を防ぐ）
SCALER_EPSILON: Final = 1e-9

# F1 スコアの分母下限
F1_EPSILON: Final = 1e-9

# 予測確率を二値化する既定の閾値
DEFAULT_THRESHOLD: Final = 0.5

# 組み立て済み特徴量 DataFrame 上でのラベル列名
FEATURE_FRAME_LABEL: Final = "label"
