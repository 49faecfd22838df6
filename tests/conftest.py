"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credit_report_gateway.api.main import create_app
from credit_report_gateway.config import Settings
from credit_report_gateway.infrastructure.database.models import Base
from credit_report_gateway.infrastructure.database.repositories import CreditReportRepository
from credit_report_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<INProfileResponse>
  <CreditProfileHeader>
    <ReportNumber>1595504758919</ReportNumber>
    <ReportDate>20200723</ReportDate>
    <ReportTime>171559</ReportTime>
    <Version>V2.4</Version>
  </CreditProfileHeader>
  <Current_Application>
    <Current_Application_Details>
      <Current_Applicant_Details>
        <First_Name>Sagar</First_Name>
        <Last_Name>Ugle</Last_Name>
        <MobilePhoneNumber>9819137672</MobilePhoneNumber>
        <IncomeTaxPan>AOZPB0247S</IncomeTaxPan>
        <Date_Of_Birth_Applicant>19820322</Date_Of_Birth_Applicant>
      </Current_Applicant_Details>
    </Current_Application_Details>
  </Current_Application>
  <CAIS_Account>
    <CAIS_Summary>
      <Credit_Account>
        <CreditAccountTotal>4</CreditAccountTotal>
        <CreditAccountActive>3</CreditAccountActive>
        <CreditAccountClosed>1</CreditAccountClosed>
      </Credit_Account>
      <Total_Outstanding_Balance>
        <Outstanding_Balance_All>245000</Outstanding_Balance_All>
      </Total_Outstanding_Balance>
    </CAIS_Summary>
    <CAIS_Account_DETAILS>
      <Subscriber_Name>ICICI Bank</Subscriber_Name>
      <Account_Number>ICIVB20994</Account_Number>
      <Portfolio_Type>R</Portfolio_Type>
      <Account_Type>10</Account_Type>
      <Current_Balance>80000</Current_Balance>
      <Amount_Past_Due>4000</Amount_Past_Due>
      <CAIS_Holder_Address_Details>
        <First_Line_Of_Address_non_normalized>ANANDI VIHAR</First_Line_Of_Address_non_normalized>
        <City_non_normalized>PUNE</City_non_normalized>
        <State_non_normalized>27</State_non_normalized>
        <ZIP_Postal_Code_non_normalized>411047</ZIP_Postal_Code_non_normalized>
        <CountryCode_non_normalized>IB</CountryCode_non_normalized>
      </CAIS_Holder_Address_Details>
    </CAIS_Account_DETAILS>
  </CAIS_Account>
  <SCORE>
    <BureauScore>719</BureauScore>
    <BureauScoreConfidLevel>H</BureauScoreConfidLevel>
  </SCORE>
</INProfileResponse>
"""

# No applicant section: identity comes from the first account's holder details.
# Two accounts, repeated history entries, CAPS enquiries only in TotalCAPS_Summary.
HOLDER_ONLY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<INProfileResponse>
  <Header>
    <ReportNumber>HDR-2001</ReportNumber>
    <ReportDate>2021-01-15</ReportDate>
    <ReportTime>09:30:00</ReportTime>
  </Header>
  <CAIS_Account>
    <CAIS_Summary>
      <Credit_Account>
        <CreditAccountTotal>5</CreditAccountTotal>
        <CreditAccountActive>2</CreditAccountActive>
        <CreditAccountClosed>0</CreditAccountClosed>
        <CreditAccountDefault>1</CreditAccountDefault>
      </Credit_Account>
      <Total_Outstanding_Balance>
        <Outstanding_Balance_Secured>500000</Outstanding_Balance_Secured>
        <Outstanding_Balance_UnSecured>25000</Outstanding_Balance_UnSecured>
        <Outstanding_Balance_All>525000</Outstanding_Balance_All>
      </Total_Outstanding_Balance>
    </CAIS_Summary>
    <CAIS_Account_DETAILS>
      <Subscriber_Name>  HDFC Bank  </Subscriber_Name>
      <Account_Number>HDFC-001</Account_Number>
      <Portfolio_Type>I</Portfolio_Type>
      <Account_Type>52</Account_Type>
      <Open_Date>20190101</Open_Date>
      <Credit_Limit_Amount></Credit_Limit_Amount>
      <Highest_Credit_or_Original_Loan_Amount>600000</Highest_Credit_or_Original_Loan_Amount>
      <Current_Balance>500000</Current_Balance>
      <Amount_Past_Due></Amount_Past_Due>
      <Account_Status>11</Account_Status>
      <Payment_Rating>0</Payment_Rating>
      <Date_Reported>20201231</Date_Reported>
      <Repayment_Tenure>240</Repayment_Tenure>
      <CAIS_Account_History>
        <Year>2020</Year>
        <Month>11</Month>
        <Days_Past_Due>0</Days_Past_Due>
        <Asset_Classification>S</Asset_Classification>
      </CAIS_Account_History>
      <CAIS_Account_History>
        <Year>2020</Year>
        <Month>12</Month>
        <Days_Past_Due>30</Days_Past_Due>
      </CAIS_Account_History>
      <CAIS_Account_History>
        <Year>2020</Year>
        <Month>12</Month>
        <Days_Past_Due>30</Days_Past_Due>
      </CAIS_Account_History>
      <CAIS_Holder_Details>
        <Surname_Non_Normalized>SHARMA</Surname_Non_Normalized>
        <First_Name_Non_Normalized>PRIYA</First_Name_Non_Normalized>
        <Gender_Code>2</Gender_Code>
        <Income_TAX_PAN>BXQPS1234K</Income_TAX_PAN>
        <Date_of_birth>19900515</Date_of_birth>
      </CAIS_Holder_Details>
      <CAIS_Holder_Phone_Details>
        <Telephone_Number>9123456780</Telephone_Number>
      </CAIS_Holder_Phone_Details>
      <CAIS_Holder_Address_Details>
        <First_Line_Of_Address_non_normalized>12 MG ROAD</First_Line_Of_Address_non_normalized>
        <Second_Line_Of_Address_non_normalized>NEAR PARK</Second_Line_Of_Address_non_normalized>
        <City_non_normalized>BANGALORE</City_non_normalized>
        <State_non_normalized>29</State_non_normalized>
        <ZIP_Postal_Code_non_normalized>560001</ZIP_Postal_Code_non_normalized>
      </CAIS_Holder_Address_Details>
    </CAIS_Account_DETAILS>
    <CAIS_Account_DETAILS>
      <Subscriber_Name>SBI Card</Subscriber_Name>
      <Account_Number>SBI-777</Account_Number>
      <Portfolio_Type>R</Portfolio_Type>
      <Account_Type>10</Account_Type>
      <Open_Date>20180310</Open_Date>
      <Current_Balance>25000</Current_Balance>
      <Amount_Past_Due>1500</Amount_Past_Due>
      <Account_Status>13</Account_Status>
      <Date_Reported>20201231</Date_Reported>
      <Date_Closed>20201130</Date_Closed>
    </CAIS_Account_DETAILS>
  </CAIS_Account>
  <TotalCAPS_Summary>
    <TotalCAPSLast7Days>1</TotalCAPSLast7Days>
    <TotalCAPSLast30Days>2</TotalCAPSLast30Days>
    <TotalCAPSLast90Days>3</TotalCAPSLast90Days>
    <TotalCAPSLast180Days>4</TotalCAPSLast180Days>
  </TotalCAPS_Summary>
</INProfileResponse>
"""


@pytest.fixture
def sample_xml() -> str:
    """Single-account report with applicant section and bureau score"""
    return SAMPLE_XML


@pytest.fixture
def holder_only_xml() -> str:
    """Two-account report without applicant section or score"""
    return HOLDER_ONLY_XML


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repository(db: Session) -> CreditReportRepository:
    return CreditReportRepository(db)


@pytest.fixture
def client_factory(db: Session):
    """Build FastAPI test clients bound to the test database, with optional settings overrides"""

    def _client(**overrides) -> TestClient:
        app = create_app(Settings(database_url=TEST_DATABASE_URL, **overrides))

        def override_get_db():
            try:
                yield db
            finally:
                pass

        app.dependency_overrides[get_db] = override_get_db
        return TestClient(app)

    return _client


@pytest.fixture
def client(client_factory) -> TestClient:
    """Create FastAPI test client with test database"""
    return client_factory()


@pytest.fixture
def upload(client: TestClient):
    """POST an XML document to /api/upload"""

    def _upload(content: str, filename: str = "report.xml", content_type: str = "application/xml"):
        return client.post(
            "/api/upload",
            files={"xmlFile": (filename, content.encode("utf-8"), content_type)},
        )

    return _upload
