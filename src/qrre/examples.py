"""
Example questionnaire builder.

Builds a small "Annual Representations & Certifications" questionnaire that
exercises every response kind used in practice: Yes/No questions with skip
logic, fixed-length identifiers, a coded dropdown with conditional jumps, a
socioeconomic multi-select stored as a Z-Code compatible bitmask, and the
comment/upload/due-date/warning widgets.
"""
from qrre.model import CommentType, Question, Questionnaire

# Bit positions follow the Z-Code weights (L = 32 ... SDVOSB = 1), so the
# stored mask of this question is a valid Z-Code.
SOCIOECONOMIC_RESPONSE = (
    "List2List:"
    "L|Large Business|5;"
    "S|Small Business|4;"
    "SDB|Small Disadvantaged Business|3;"
    "WOSB|Woman-Owned Small Business|2;"
    "VOSB|Veteran-Owned Small Business|1;"
    "SDVOSB|Service-Disabled Veteran-Owned Small Business|0"
)


def build_example_reps_certs(name: str = "Annual Reps & Certs") -> Questionnaire:
    company = "Company Profile"
    compliance = "Compliance"

    questions = [
        Question(
            qid=1001, page=1, surveyset=company, title="registered",
            prompt="Is your company registered in SAM.gov?",
            response="Y/N", required=True,
        ),
        Question(
            qid=1002, page=1, surveyset=company, title="has_uei",
            prompt="Do you have a Unique Entity ID?",
            response="Y/N", required=True,
            skip_logic_answer="0", skip_logic_jump="1005",
        ),
        Question(
            qid=1003, page=1, surveyset=company, title="uei",
            prompt="Enter your 12-character Unique Entity ID",
            response="TEXT_NUMBER_12", required=True,
        ),
        Question(
            qid=1004, page=1, surveyset=company, title="uei_expiry",
            prompt="When does your registration expire?",
            response="DATE", required=True,
        ),
        Question(
            qid=1005, page=2, surveyset=company, title="size",
            prompt="What is your business size standard?",
            response="DROPDOWN:Large(AA);Small(AB);Not sure(AC)", required=True,
            skip_logic_answer="D", skip_logic_jump="AA:1007;*:1006",
        ),
        Question(
            qid=1006, page=2, surveyset=company, title="socioeconomic",
            prompt="Select all socioeconomic classifications that apply",
            response=SOCIOECONOMIC_RESPONSE, required=True,
        ),
        Question(
            qid=1007, page=3, surveyset=compliance, title="debarred",
            prompt="Is your company currently debarred or suspended?",
            response="Y/N", required=True,
            comment_type=CommentType.YN_WARNING_Y,
            warning_message="Debarred suppliers cannot be awarded new work. Contact your buyer.",
        ),
        Question(
            qid=1008, page=3, surveyset=compliance, title="iso_cert",
            prompt="Do you hold a current ISO 9001 certificate?",
            response="Y/N", required=True,
            comment_type=CommentType.YN_UPLOAD_Y,
            upload_message="Upload the certificate.",
        ),
        Question(
            qid=1009, page=3, surveyset=compliance, title="cmmc",
            prompt="Have you completed your CMMC self-assessment?",
            response="Y/N/NA", required=True,
            comment_type=CommentType.YN_COMMENT_N,
            comment_message="Explain your remediation plan.",
        ),
        Question(
            qid=1010, page=3, surveyset=compliance, title="corrective_action",
            prompt="Do you have open corrective actions?",
            response="Y/N", required=False,
            comment_type=CommentType.YN_DUEDATE_Y,
            calendar_message="Expected closure date",
        ),
        Question(
            qid=1011, page=4, surveyset=compliance, title="notes",
            prompt="Anything else we should know?",
            response="TEXT", required=False,
            comment_type=CommentType.COMMENTONLY,
        ),
    ]

    return Questionnaire(name=name, questions=questions, metadata={"source": "examples"})
